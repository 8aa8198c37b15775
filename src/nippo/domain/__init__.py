"""Domain layer: entities, events, ports and rules. No I/O lives here."""
