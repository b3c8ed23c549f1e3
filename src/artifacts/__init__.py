"""Writers for generated modules and the key manifest."""
