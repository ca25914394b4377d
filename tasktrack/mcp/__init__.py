"""JSON-RPC 2.0 messages, tool-outcome responses and the line-based stdio transport."""