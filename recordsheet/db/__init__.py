"""Database access: connection factory and bulk insert/select."""
