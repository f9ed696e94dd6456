"""User-facing interfaces for typstbib."""
