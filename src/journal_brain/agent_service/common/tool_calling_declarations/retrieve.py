# tool calling declaration for the retrieve tool

retrieve_declaration = {
    "name": "retrieve",
    "description": "Fetch journal data, saved memories, analytics, or summaries with flexible filtering, sorting, and views. Use this for ALL data retrieval needs. Large results come back as a preview with a resultId; pass that resultId to analyze for the full data.",
    "parameters": {
        "type": "object",
        "properties": {
            "scope": {
                "type": "string",
                "enum": ["chunks", "entries", "memory", "analytics", "summaries"],
                "description": "What to retrieve: 'chunks' (journal passages), 'entries' (one best passage per journal entry), 'memory' (saved insights and rules), 'analytics' (per-entry mood metrics), 'summaries' (month/year summaries, requires timeGranularity).",
            },
            "filter": {
                "type": "object",
                "description": "Filtering criteria.",
                "properties": {
                    "dateFrom": {"type": "string", "description": "Start date (ISO 8601, e.g. '2025-01-01')."},
                    "dateTo": {"type": "string", "description": "End date (ISO 8601). A date without time includes the whole day."},
                    "ids": {"type": "array", "items": {"type": "string"}, "description": "Specific chunk IDs."},
                    "entities": {"type": "array", "items": {"type": "string"}, "description": "Keep passages mentioning any of these people, places or projects."},
                    "topics": {"type": "array", "items": {"type": "string"}, "description": "Keep passages mentioning any of these topics. For scope 'memory' these match memory tags."},
                    "sentiment": {"type": "string", "enum": ["positive", "negative", "neutral"], "description": "Filter analytics by sentiment."},
                    "metric": {"type": "string", "enum": ["happiness", "stress", "energy"], "description": "Metric for analytics scope (default happiness)."},
                    "similarTo": {"type": "string", "description": "Natural language query for semantic search. Do NOT use this for 'latest', 'recent', 'yesterday' or 'last entry' queries, use sort=date_desc instead."},
                    "keyword": {"type": "string", "description": "Keyword(s) for full-text search."},
                    "minSimilarity": {"type": "number", "description": "Minimum similarity threshold (0-1, default 0.4)."},
                    "timeGranularity": {"type": "string", "enum": ["day", "week", "month", "year"], "description": "Bucket size for summaries scope (month or year)."},
                    "recencyHalfLife": {"type": "number", "description": "Recency decay half-life in days (default 30, use 9999 for lifelong questions)."},
                },
            },
            "sort": {
                "type": "string",
                "enum": ["date_desc", "date_asc", "similarity_desc", "magnitude_desc", "hybrid"],
                "description": "How to rank results (default hybrid). Use date_desc for 'latest' or 'recent' queries.",
            },
            "limit": {
                "type": "integer",
                "description": "Maximum number of results, 1-200 (default 10).",
            },
            "view": {
                "type": "string",
                "enum": ["raw", "timeline", "stats", "histogram"],
                "description": "Output format for analytics/summaries (default raw).",
            },
        },
        "required": ["scope"],
    },
}
