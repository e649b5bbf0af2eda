# tool calling declaration for the memory_write tool

memory_write_declaration = {
    "name": "memory_write",
    "description": "Save an insight, decision, rule, or commitment for future conversations. Use this to remember important patterns, correlations, or decisions discovered during analysis.",
    "parameters": {
        "type": "object",
        "properties": {
            "kind": {
                "type": "string",
                "enum": ["insight", "decision", "todo", "rule", "value", "commitment"],
                "description": "insight (pattern/observation), decision (choice made), todo (suggested action), rule (correlation/rule of thumb), value (core principle), commitment (promise).",
            },
            "content": {
                "type": "string",
                "description": "What to remember. Be specific and actionable.",
            },
            "tags": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Tags for categorization, e.g. ['work', 'health'].",
            },
            "relatedIds": {
                "type": "array",
                "items": {"type": "string"},
                "description": "IDs of journal entries or chunks supporting this memory.",
            },
            "confidence": {
                "type": "string",
                "enum": ["low", "medium", "high"],
                "description": "Confidence in this memory (default medium).",
            },
        },
        "required": ["kind", "content"],
    },
}
