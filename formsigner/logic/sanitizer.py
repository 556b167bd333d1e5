from __future__ import annotations
import logging
from typing import Iterable, List, Tuple

from ..models.annotation import ButtonAnnotation
from ..models.form_document import FormDocument
from ..models.form_enums import AnnotationKind

logger = logging.getLogger(__name__)


def remove_button_annotations(
    document: FormDocument,
    denylist: Iterable[str],
    *,
    first_match_only: bool = True,
) -> List[Tuple[int, ButtonAnnotation]]:
    """
    Drop button widgets whose field name is on the denylist.

    With `first_match_only` (the default) the scan ends after the first
    removal in the whole document, even if further pages or other denylisted
    names would match. Pass False to remove every match.

    Returns (page_index, annotation) for each removed widget.
    """
    names = set(denylist)
    removed: List[Tuple[int, ButtonAnnotation]] = []
    for page in document.pages:
        for annotation in list(page.annotations):
            if annotation.kind != AnnotationKind.BUTTON or annotation.field_name not in names:
                continue
            page.remove_annotation(annotation)
            removed.append((page.index, annotation))
            logger.info(f"Removed button '{annotation.field_name}' from page {page.index + 1}")
            if first_match_only:
                return removed
    return removed
