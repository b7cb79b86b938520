"""Resolution of field and mixin declarations."""
