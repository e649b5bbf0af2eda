# task types accepted by the Gemini embedding API
# NOTE: RETRIEVAL_DOCUMENT for indexed corpus text, RETRIEVAL_QUERY for search queries (similarTo)

VALID_GEMINI_TASK_TYPES = frozenset({
    "SEMANTIC_SIMILARITY",
    "CLASSIFICATION",
    "CLUSTERING",
    "RETRIEVAL_DOCUMENT",
    "RETRIEVAL_QUERY",
    "CODE_RETRIEVAL_QUERY",
    "QUESTION_ANSWERING",
    "FACT_VERIFICATION",
})
