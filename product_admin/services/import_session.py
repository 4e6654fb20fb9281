"""
Import Session

CSV + ZIP bulk product import: the admin selects a CSV and one or more ZIP
archives of images, previews the server's parse as product groups, fixes
individual rows (each edit is re-checked by the server against the rest of
the batch) and saves the whole batch in one request.
"""

import math
from typing import List, Optional, Tuple, Union
from urllib.parse import urlparse

from pydantic import ValidationError

from product_admin.clients.product_client import ProductClient
from product_admin.core.config import config
from product_admin.core.errors import ErrorResponse, error_response_handler
from product_admin.core.logger import logger
from product_admin.models.bulk_import import (
    CheckDetailRequest,
    CheckDetailRow,
    FileProductDetail,
    ImportRow,
    ImportStage,
    ProductGroup,
    RowEdit,
)
from product_admin.models.files import UploadedFile
from product_admin.models.results import OperationResult
from product_admin.models.vocabulary import Vocabulary, leaf_category_name
from product_admin.services.csv_normalizer import normalize_csv_file
from product_admin.services.notifier import Notifier
from product_admin.services.vocabulary_service import VocabularyService

MSG_REQUIRED_FIELDS = "Please fill Title, Color, Size."
MSG_NEGATIVE_NUMBERS = "Price and Quantity must be non-negative numbers."
MSG_WHOLE_QUANTITY = "Quantity must be a whole number."
MSG_INVALID_URL = "Please enter a valid image URL"

EDITABLE_STAGES = (ImportStage.PREVIEWED, ImportStage.SAVE_FAILED)
BUSY_STAGES = (ImportStage.PREVIEWING, ImportStage.SAVING)

FlatRow = Tuple[int, ProductGroup, ImportRow]


def is_valid_image_url(url: str) -> bool:
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _is_non_negative(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value >= 0


_ROW_EDIT_LABELS = {
    "title": "Title",
    "category": "Category",
    "color": "Color",
    "size": "Size",
    "imageUrls": "Image URLs",
}


def _row_edit_error(error: ValidationError) -> str:
    """Message naming the first row edit field that failed validation"""
    fields = [str(detail["loc"][0]) for detail in error.errors() if detail.get("loc")]
    if not fields or fields[0] in ("price", "quantity"):
        return MSG_NEGATIVE_NUMBERS
    return f"Invalid value for {_ROW_EDIT_LABELS.get(fields[0], fields[0])}."


class ImportSession:
    """State of one CSV bulk import, from file selection to batch save"""

    def __init__(
        self,
        product_client: Optional[ProductClient] = None,
        notifier: Optional[Notifier] = None,
        vocabulary_service: Optional[VocabularyService] = None,
    ):
        self.product_client = product_client or ProductClient()
        self.notifier = notifier or Notifier()
        self.vocabulary_service = vocabulary_service or VocabularyService()
        self.vocabulary: Optional[Vocabulary] = None

        self.stage = ImportStage.NO_FILE
        self.uploaded_file: Optional[UploadedFile] = None
        self.zips: List[UploadedFile] = []
        self.groups: List[ProductGroup] = []
        self.checking = False
        # Bumped whenever the row set is replaced or reshaped; late check-detail
        # responses for an older generation are dropped
        self._generation = 0

    # Files

    def _refresh_file_stage(self) -> None:
        if self.stage in EDITABLE_STAGES and self.groups:
            return
        if self.uploaded_file is None:
            self.stage = ImportStage.NO_FILE
        elif self.zips:
            self.stage = ImportStage.READY_TO_PREVIEW
        else:
            self.stage = ImportStage.FILE_SELECTED

    def _busy_result(self, operation: str) -> OperationResult:
        return OperationResult.failure(f"Cannot {operation} while {self.stage.value}")

    def select_file(self, file: UploadedFile) -> OperationResult:
        """Normalize and hold the CSV; any previous preview is discarded"""
        if self.stage in BUSY_STAGES:
            return self._busy_result("select a file")
        try:
            normalized = normalize_csv_file(file)
        except ErrorResponse as e:
            return error_response_handler(e, self.notifier, title="Invalid CSV file")

        self.uploaded_file = normalized
        self.groups = []
        self._generation += 1
        self.stage = ImportStage.NO_FILE
        self._refresh_file_stage()
        logger.info(
            f"CSV selected: {file.filename}",
            metadata={"event": "import_file_selected", "size": file.size},
        )
        return OperationResult.success(data=normalized)

    def add_zip(self, file: UploadedFile) -> OperationResult:
        if self.stage in BUSY_STAGES:
            return self._busy_result("add an archive")
        if not file.is_zip:
            message = "Only .zip archives are accepted"
            self.notifier.show_error("Invalid archive", message)
            return OperationResult.failure(message)
        self.zips.append(file)
        self._refresh_file_stage()
        return OperationResult.success()

    def remove_zip(self, index: int) -> bool:
        if self.stage in BUSY_STAGES or not 0 <= index < len(self.zips):
            return False
        del self.zips[index]
        self._refresh_file_stage()
        return True

    # Preview

    @property
    def can_preview(self) -> bool:
        return (
            self.uploaded_file is not None
            and bool(self.zips)
            and self.stage in (ImportStage.READY_TO_PREVIEW, *EDITABLE_STAGES)
        )

    async def preview(self) -> OperationResult:
        if not self.can_preview:
            message = "Select a CSV file and at least one ZIP archive first"
            self.notifier.show_error("Cannot preview", message)
            return OperationResult.failure(message)

        self.stage = ImportStage.PREVIEWING
        self.groups = []
        self._generation += 1
        try:
            groups = await self.product_client.import_preview(self.uploaded_file, self.zips)
        except ErrorResponse as e:
            self.stage = ImportStage.READY_TO_PREVIEW
            return error_response_handler(e, self.notifier, title="Preview failed")

        self.groups = groups
        self.stage = ImportStage.PREVIEWED
        logger.info(
            "Import preview loaded",
            metadata={
                "event": "import_previewed",
                "groups": len(groups),
                "rows": self.row_count,
                "error_rows": sum(1 for _, _, row in self.rows() if row.is_error),
            },
        )
        return OperationResult.success(data=groups)

    # Rows

    def rows(self) -> List[FlatRow]:
        """Flattened (index, group, row) view in group order"""
        flat: List[FlatRow] = []
        for group in self.groups:
            for row in group.product_details:
                flat.append((len(flat), group, row))
        return flat

    @property
    def row_count(self) -> int:
        return sum(len(group.product_details) for group in self.groups)

    @property
    def has_errors(self) -> bool:
        return any(group.has_errors for group in self.groups)

    def _locate(self, row_index: int) -> Optional[Tuple[int, int]]:
        if row_index < 0:
            return None
        offset = 0
        for group_index, group in enumerate(self.groups):
            count = len(group.product_details)
            if row_index < offset + count:
                return group_index, row_index - offset
            offset += count
        return None

    async def load_vocabulary(self) -> Vocabulary:
        """Allowed colors, sizes and category labels for the row edit form"""
        self.vocabulary = await self.vocabulary_service.load()
        return self.vocabulary

    def _vocabulary_error(self, color: str, size: str, category: str) -> Optional[str]:
        """Reject values outside the form's vocabulary; a part that failed to load is not checked"""
        vocabulary = self.vocabulary
        if vocabulary is None:
            return None
        if vocabulary.colors and not vocabulary.allows_color(color):
            return f"Unknown color: {color}"
        if vocabulary.sizes and not vocabulary.allows_size(size):
            return f"Unknown size: {size}"
        if category and vocabulary.categories and not vocabulary.allows_category(category):
            return f"Unknown category: {category}"
        return None

    def _reject_edit(self, message: str, title: Optional[str] = None) -> OperationResult:
        if title:
            self.notifier.show_error(title, message)
        else:
            self.notifier.show_error(message)
        return OperationResult.failure(message)

    async def edit_row(self, row_index: int, values: Union[RowEdit, dict]) -> OperationResult:
        """
        Apply an edit to one row after the server re-checks it against the batch.

        Args:
            row_index: Flat row index as returned by rows()
            values: Edited title, category, color, size, price, quantity and image URLs

        Returns:
            OperationResult with the updated row; ``ok`` is False when the
            server flags the row or the edit was rejected
        """
        if self.stage not in EDITABLE_STAGES:
            return self._busy_result("edit a row")
        if self.checking:
            return OperationResult.failure("A row check is already in progress")

        location = self._locate(row_index)
        if location is None:
            return OperationResult.failure(f"Row {row_index} does not exist")
        group_index, detail_index = location
        group = self.groups[group_index]
        row = group.product_details[detail_index]

        if isinstance(values, dict):
            try:
                values = RowEdit.model_validate(values)
            except ValidationError as e:
                return self._reject_edit(_row_edit_error(e))

        title = values.title.strip()
        color = values.color.strip()
        size = values.size.strip()
        if not title or not color or not size:
            return self._reject_edit(MSG_REQUIRED_FIELDS)
        if not _is_non_negative(values.price) or not _is_non_negative(values.quantity):
            return self._reject_edit(MSG_NEGATIVE_NUMBERS)
        if not float(values.quantity).is_integer():
            return self._reject_edit(MSG_WHOLE_QUANTITY)

        limit = config.max_images_per_variant
        if len(values.image_urls) > limit:
            return self._reject_edit(
                f"You can only add up to {limit} images per product", title="Maximum images reached"
            )
        new_urls = [url for url in values.image_urls if url not in row.image_urls]
        if any(not is_valid_image_url(url) for url in new_urls):
            return self._reject_edit(MSG_INVALID_URL, title="Invalid URL")
        unknown = self._vocabulary_error(color, size, values.category.strip())
        if unknown:
            return self._reject_edit(unknown)

        siblings = [
            FileProductDetail(
                product_title=other.product_title or other_group.product_title,
                color=other.color,
                size=other.size,
            )
            for index, other_group, other in self.rows()
            if index != row_index
        ]
        request = CheckDetailRequest(
            product_title=title,
            detail=CheckDetailRow(
                product_title=title,
                color=color,
                size=size,
                category=leaf_category_name(values.category),
            ),
            file_product_details=siblings,
        )

        generation = self._generation
        self.checking = True
        try:
            check = await self.product_client.check_detail(request)
        except ErrorResponse as e:
            return error_response_handler(e, self.notifier, title="Row check failed")
        finally:
            self.checking = False

        if generation != self._generation:
            logger.debug(
                "Discarding row check for a replaced batch",
                metadata={"event": "import_row_check_stale", "row_index": row_index},
            )
            return OperationResult.failure("Import rows changed while the row was being checked")

        updated = row.model_copy(update={
            "product_title": title,
            "category": values.category,
            "color": color,
            "size": size,
            "price": float(values.price),
            "quantity": int(values.quantity),
            "image_urls": list(values.image_urls),
            "is_error": check.error,
            "error_message": check.error_message,
        })
        details = list(group.product_details)
        details[detail_index] = updated
        self.groups[group_index] = group.model_copy(update={
            "product_title": title,
            "category": values.category,
            "product_details": details,
        })

        logger.info(
            f"Import row {row_index} edited",
            metadata={"event": "import_row_edited", "row_index": row_index, "is_error": check.error},
        )
        if check.error:
            self.notifier.show_error("Row has errors", check.error_message)
        return OperationResult(ok=not check.error, message=check.error_message, data=updated)

    def delete_row(self, row_index: int) -> bool:
        """Remove a row; a group left without rows is removed with it"""
        if self.stage not in EDITABLE_STAGES:
            return False
        location = self._locate(row_index)
        if location is None:
            return False
        group_index, detail_index = location
        group = self.groups[group_index]
        details = [row for i, row in enumerate(group.product_details) if i != detail_index]
        if details:
            self.groups[group_index] = group.model_copy(update={"product_details": details})
        else:
            del self.groups[group_index]
        self._generation += 1
        return True

    # Save

    async def save(self) -> OperationResult:
        if self.stage in BUSY_STAGES:
            return self._busy_result("save")
        if self.has_errors:
            message = "There are still products with errors. Please fix or delete them before saving."
            self.notifier.show_error("Cannot Save", message)
            return OperationResult.failure(message)
        if self.row_count == 0:
            message = "No products to save. Please upload a CSV file."
            self.notifier.show_error("No products", message)
            return OperationResult.failure(message)

        total = self.row_count
        batch = [group.with_leaf_categories() for group in self.groups]
        self.stage = ImportStage.SAVING
        try:
            response = await self.product_client.import_save(batch)
        except ErrorResponse as e:
            self.stage = ImportStage.SAVE_FAILED
            return error_response_handler(e, self.notifier, title="Save Failed")

        self.groups = []
        self.uploaded_file = None
        self.zips = []
        self._generation += 1
        self.stage = ImportStage.SAVED

        message = f"Imported {total} products successfully."
        self.notifier.show_success("Import Successful", message)
        logger.info(message, metadata={"event": "import_saved", "rows": total})
        return OperationResult.success(message, data=response.data)

    def reset(self) -> None:
        self.groups = []
        self.uploaded_file = None
        self.zips = []
        self.checking = False
        self._generation += 1
        self.stage = ImportStage.NO_FILE
