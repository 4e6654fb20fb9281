"""
Vocabulary Service
Loads the active colors, sizes and category tree once per session.
"""

from typing import Optional, Set

from product_admin.clients.reference_client import ReferenceClient
from product_admin.core.errors import ErrorResponse
from product_admin.core.logger import logger
from product_admin.models.vocabulary import Vocabulary, flatten_leaf_categories

PARTS = ("colors", "sizes", "categories")


class VocabularyService:
    """Caches the reference vocabulary fetched from the admin API"""

    def __init__(self, reference_client: Optional[ReferenceClient] = None):
        self.reference_client = reference_client or ReferenceClient()
        self._vocabulary: Optional[Vocabulary] = None
        self._failed: Set[str] = set()

    @property
    def loaded(self) -> bool:
        return self._vocabulary is not None

    async def _fetch(self, part: str) -> list:
        if part == "colors":
            return await self.reference_client.get_active_colors()
        if part == "sizes":
            return await self.reference_client.get_active_sizes()
        return flatten_leaf_categories(await self.reference_client.get_category_tree())

    async def load(self, force: bool = False) -> Vocabulary:
        """
        Fetch the vocabulary, or return the cached copy.

        A part that fails to load is left empty and logged as a warning; the
        next call fetches that part again. This method never raises.
        """
        if self._vocabulary is not None and not force and not self._failed:
            return self._vocabulary

        if self._vocabulary is None or force:
            pending = PARTS
            loaded = {part: [] for part in PARTS}
        else:
            pending = tuple(part for part in PARTS if part in self._failed)
            loaded = {part: getattr(self._vocabulary, part) for part in PARTS}

        for part in pending:
            try:
                loaded[part] = await self._fetch(part)
            except ErrorResponse as e:
                self._failed.add(part)
                loaded[part] = []
                logger.warning(
                    f"Failed to load {part}",
                    error=e,
                    metadata={"event": "vocabulary_load_failed", "part": part},
                )
            else:
                self._failed.discard(part)

        self._vocabulary = Vocabulary(**loaded)
        logger.info(
            "Reference vocabulary loaded",
            metadata={
                "event": "vocabulary_loaded",
                "colors": len(self._vocabulary.colors),
                "sizes": len(self._vocabulary.sizes),
                "categories": len(self._vocabulary.categories),
                "failed": sorted(self._failed),
            },
        )
        return self._vocabulary
