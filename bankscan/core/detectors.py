"""
Statement layout loading and detection.
"""
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Sequence
from rapidfuzz import fuzz
import logging

from ..exceptions import LayoutNotFoundError
from ..models.schema import StatementLayout, PageMatch, split_lines

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_ID = "us_checking_v1"
DEFAULT_LAYOUTS_DIR = Path(__file__).parent.parent / "layouts"


def layout_from_config(config: Dict[str, Any]) -> StatementLayout:
    """
    Build a StatementLayout from a parsed YAML mapping.

    Args:
        config: Layout configuration as loaded from YAML

    Returns:
        StatementLayout object
    """
    sections = config.get('sections') or {}
    purchases = config.get('purchases') or {}
    fields: Dict[str, Any] = {
        'layout_id': config['layout_id'],
        'page_match': PageMatch(**(config.get('page_match') or {})),
    }
    if 'bank' in config:
        fields['bank'] = config['bank']
    if 'deposits_header' in sections:
        fields['deposits_header'] = sections['deposits_header']
    if 'withdrawals_header' in sections:
        fields['withdrawals_header'] = sections['withdrawals_header']
    if 'atm_marker' in config:
        fields['atm_marker'] = config['atm_marker']
    if 'markers' in purchases:
        fields['purchase_markers'] = purchases['markers']
    if 'description' in purchases:
        fields['purchase_description'] = purchases['description']
    return StatementLayout(**fields)


def find_anchor(lines: Sequence[str], target: str, fuzzy_threshold: float = 85) -> Optional[float]:
    """
    Find the best line match for an anchor phrase.

    Args:
        lines: Lines to search through
        target: Anchor text to find
        fuzzy_threshold: Minimum confidence score (0-100)

    Returns:
        Confidence of the best match, or None if nothing reaches the threshold
    """
    best_confidence = None
    target_lower = target.lower()

    for line in lines:
        line_lower = line.lower()
        if target_lower in line_lower:
            return 100.0

        confidence = fuzz.partial_ratio(target_lower, line_lower)
        if confidence >= fuzzy_threshold and (best_confidence is None or confidence > best_confidence):
            best_confidence = confidence

    return best_confidence


class LayoutRegistry:
    """Loads layout files and detects which layout matches a statement."""

    def __init__(self, layouts_dir: Path = None):
        env_dir = os.environ.get('BANKSCAN_LAYOUTS_DIR')
        self.layouts_dir = layouts_dir or (Path(env_dir) if env_dir else DEFAULT_LAYOUTS_DIR)
        self.layouts: Dict[str, StatementLayout] = {}
        self._load_layouts()

    def _load_layouts(self):
        """Load all available layouts."""
        if not self.layouts_dir.exists():
            logger.warning(f"Layouts directory not found: {self.layouts_dir}")
            return

        for yaml_file in sorted(self.layouts_dir.glob("*.yaml")):
            try:
                with open(yaml_file, 'r', encoding='utf-8') as f:
                    layout = layout_from_config(yaml.safe_load(f))
                self.layouts[layout.layout_id] = layout
                logger.debug(f"Loaded layout: {layout.layout_id}")
            except Exception as e:
                logger.error(f"Error loading layout {yaml_file}: {e}")

    def get_layout(self, layout_id: str) -> StatementLayout:
        """Get layout by id, raising LayoutNotFoundError if unknown."""
        layout = self.layouts.get(layout_id)
        if layout is None:
            raise LayoutNotFoundError(f"Layout not found: {layout_id}")
        return layout

    def list_layouts(self) -> List[str]:
        """List all available layout ids."""
        return list(self.layouts.keys())

    def matches_layout(self, lines: Sequence[str], layout: StatementLayout) -> bool:
        must_contain = layout.page_match.must_contain
        if not must_contain:
            logger.warning(f"Layout {layout.layout_id} has no 'must_contain' requirements")
            return False

        found = 0
        for anchor in must_contain:
            confidence = find_anchor(lines, anchor, layout.page_match.fuzzy_threshold)
            if confidence is None:
                logger.debug(f"Anchor '{anchor}' not found for layout {layout.layout_id}")
            else:
                logger.debug(f"Found anchor '{anchor}' with confidence {confidence:.1f}")
                found += 1
        return found == len(must_contain)

    def detect_layout(self, text: str) -> Optional[str]:
        """
        Detect which layout matches recognized statement text.

        Args:
            text: Recognized text of a whole document

        Returns:
            Layout id if found, None otherwise
        """
        lines = split_lines(text)
        for layout_id, layout in self.layouts.items():
            if self.matches_layout(lines, layout):
                logger.info(f"Text matches layout: {layout_id}")
                return layout_id

        logger.warning("No matching layout found")
        return None


def default_layout() -> StatementLayout:
    """Layout used when no layout is requested or detected."""
    return StatementLayout(
        layout_id=DEFAULT_LAYOUT_ID,
        page_match=PageMatch(must_contain=[
            "Deposits and Other Credits",
            "Withdrawals and Other Debits",
        ]),
    )


def detect_layout(text: str) -> Optional[str]:
    """
    Convenience function to detect the layout of recognized text.

    Args:
        text: Recognized text of a whole document

    Returns:
        Layout id if found, None otherwise
    """
    registry = LayoutRegistry()
    return registry.detect_layout(text)
