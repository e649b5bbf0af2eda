# tool calling declaration for the analyze tool

analyze_declaration = {
    "name": "analyze",
    "description": "Run LLM-powered analysis on retrieved data. Use after retrieve to identify lifelong patterns, build a decision matrix, or synthesize next actions.",
    "parameters": {
        "type": "object",
        "properties": {
            "op": {
                "type": "string",
                "enum": ["lifelong_patterns", "decision_matrix", "action_synthesis"],
                "description": "Operation to perform.",
            },
            "inputs": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Result IDs from previous retrieve calls, e.g. ['retrieve_1']. The full cached data is resolved from these IDs.",
            },
            "config": {
                "type": "object",
                "description": "Operation-specific configuration.",
                "properties": {
                    "maxItems": {"type": "integer", "description": "Maximum actions to return (action_synthesis)."},
                    "minOccurrences": {"type": "integer", "description": "Minimum pattern occurrences (lifelong_patterns)."},
                    "minSpanMonths": {"type": "integer", "description": "Minimum time span in months (lifelong_patterns)."},
                    "balance": {"type": "array", "items": {"type": "string"}, "description": "Life areas to balance (action_synthesis)."},
                    "criteria": {"type": "array", "items": {"type": "string"}, "description": "Decision criteria (decision_matrix)."},
                    "options": {"type": "array", "items": {"type": "string"}, "description": "Options to evaluate (decision_matrix)."},
                    "includeFirstStep": {"type": "boolean", "description": "Include a first step per action (action_synthesis)."},
                    "includeCounterfactuals": {"type": "boolean", "description": "Include what-if analysis (decision_matrix)."},
                    "requireRecurring": {"type": "boolean", "description": "Only detect recurring patterns (lifelong_patterns)."},
                },
            },
        },
        "required": ["op", "inputs"],
    },
}
