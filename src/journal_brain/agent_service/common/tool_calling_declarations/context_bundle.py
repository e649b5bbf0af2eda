# tool calling declaration for the context_bundle tool

context_bundle_declaration = {
    "name": "context_bundle",
    "description": "Load a warm-start context bundle: recent mood metrics and trends, recent month summaries, and saved memories. Call this at the start of a conversation.",
    "parameters": {
        "type": "object",
        "properties": {
            "recentDays": {"type": "integer", "description": "Number of recent days of analytics to include (default 60)."},
            "historyMonths": {"type": "integer", "description": "Number of months of summaries to include (default 24)."},
            "includeMemory": {"type": "boolean", "description": "Include saved insights and rules (default true)."},
        },
    },
}
