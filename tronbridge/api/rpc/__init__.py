"""JSON-RPC transformation engine: dispatch table, normalizers and response fixups."""
