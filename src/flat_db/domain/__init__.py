"""Domain layer: type system, table model and error taxonomy."""
