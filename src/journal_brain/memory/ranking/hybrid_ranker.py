# hybrid ranking: semantic similarity + recency decay + keyword relevance + metric magnitude
# one deterministic ordering over heterogeneous candidates (chunks, analytics rows, summaries)

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from journal_brain.common.services.embedding_service.text_embedding import TypedTextEmbeddingProtocol
from journal_brain.common.utils.time_utils import utc_now
from journal_brain.memory.ranking import scoring
from journal_brain.memory.ranking.profiles import RankingWeights, select_profile
from journal_brain.memory.retrieval.query import RetrieveQuery
from journal_brain.memory.retrieval.results import RankedItem, ScoreComponents, Provenance
from journal_brain.memory.storage.protocols import CorpusStore
from journal_brain.common.logging.logger import logger

QUERY_EMBEDDING_TASK_TYPE = "RETRIEVAL_QUERY"

class RankingCandidate(BaseModel):
    """
    Uniform view of anything the ranker can score.
    - magnitude is a normalized [0, 1] scalar (analytics/summaries only)
    - values carries raw scalar payloads through to the ranked item
    """
    model_config = ConfigDict(frozen=True)

    id: str
    date: datetime
    text: Optional[str] = None
    embedding: Optional[list[float]] = None
    magnitude: Optional[float] = None
    provenance: Provenance
    values: Optional[dict[str, float]] = None

class HybridRanker():
    """
    Scores candidates as a convex combination of the available components under a weight profile:
        score = similarity*w_sim + recency_decay*w_rec + keyword*w_kw + magnitude*w_mag
    Missing components contribute 0.
    """

    def __init__(
        self,
        embedding_client: TypedTextEmbeddingProtocol,
        store: CorpusStore,
        keyword_search_limit: int = 200,
    ):
        self.embedding_client = embedding_client
        self.store = store
        self.keyword_search_limit = keyword_search_limit

    async def rank(
        self,
        candidates: list[RankingCandidate],
        query: RetrieveQuery,
        weights: Optional[RankingWeights] = None,
        now: Optional[datetime] = None,
    ) -> list[RankedItem]:
        """
        Ranks candidates, best first, truncated to query.limit.

        Args:
            candidates: candidates in fetch order (date ascending), kept for equal scores
            query: the validated retrieve query
            weights: pin a profile, otherwise chosen by select_profile(query)
            now: reference time for recency decay, defaults to the current UTC time
        """
        if not candidates:
            return []

        profile = weights or select_profile(query)
        half_life = query.filter.recency_half_life if query.filter.has_explicit_half_life else profile.recency_half_life
        now = now or utc_now()

        query_embedding = await self._embed_query(query.filter.similar_to)
        keyword_scores = await self._keyword_scores(query.filter.keyword)

        scored: list[tuple[float, RankingCandidate, ScoreComponents]] = []
        for candidate in candidates:
            similarity = None
            if query_embedding is not None and candidate.embedding is not None:
                similarity = scoring.cosine_similarity(query_embedding, candidate.embedding)

            recency = scoring.recency_decay(scoring.age_in_days(candidate.date, now), half_life)

            keyword = None
            if keyword_scores is not None:
                keyword = keyword_scores.get(candidate.id, 0.0)

            magnitude = None
            if candidate.magnitude is not None:
                magnitude = scoring.clamp(candidate.magnitude, 0.0, 1.0)

            score = (
                (similarity or 0.0) * profile.similarity
                + recency * profile.recency
                + (keyword or 0.0) * profile.keyword
                + (magnitude or 0.0) * profile.magnitude
            )
            components = ScoreComponents(
                similarity=similarity,
                recency_decay=recency,
                keyword_match=keyword,
                magnitude=magnitude,
            )
            scored.append((score, candidate, components))

        # sort is stable, equal scores keep fetch order
        scored.sort(key=lambda entry: entry[0], reverse=True)
        logger.debug(
            f"Ranked {len(scored)} candidates with profile '{profile.name}' (half-life {half_life}d), keeping {query.limit}"
        )

        return [
            RankedItem(
                id=candidate.id,
                date=candidate.date,
                text=candidate.text,
                score=score,
                components=components,
                provenance=candidate.provenance,
                values=candidate.values,
            )
            for score, candidate, components in scored[:query.limit]
        ]

    async def _embed_query(self, similar_to: Optional[str]) -> Optional[list[float]]:
        # one embedding call per rank() invocation
        if not similar_to:
            return None
        embeddings = await self.embedding_client.aembed_text(text=[similar_to], task_type=QUERY_EMBEDDING_TASK_TYPE)
        if not embeddings:
            logger.warning(f"No embedding returned for similarTo '{similar_to}', skipping similarity")
            return None
        return embeddings[0]

    async def _keyword_scores(self, keyword: Optional[str]) -> Optional[dict[str, float]]:
        if not keyword:
            return None
        hits = await self.store.keyword_search(keyword, self.keyword_search_limit)
        return {hit_id: scoring.normalize_keyword_score(raw_score) for hit_id, raw_score in hits}
