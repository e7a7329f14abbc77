"""GateFlow campus access-control backend."""
