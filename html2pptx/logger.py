"""
Logging and QA module

Collects warnings for skipped elements, unsupported effects and font replacements during export
"""
import logging
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field


@dataclass
class ConversionWarning:
    """Warning during conversion"""
    element_id: Optional[str]
    warning_type: str  # 'skipped_element', 'unsupported_effect', 'font_missing'
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class ConversionLogger:
    """Logger for conversion process"""

    def __init__(self, warn_unsupported: bool = True):
        """
        Args:
            warn_unsupported: Whether to warn about unsupported effects
        """
        self.warn_unsupported = warn_unsupported
        self.warnings: List[ConversionWarning] = []
        self.logger = logging.getLogger('html2pptx')

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def _record(self, element_id: Optional[str], warning_type: str, message: str, details: Dict[str, Any]):
        self.warnings.append(ConversionWarning(
            element_id=element_id,
            warning_type=warning_type,
            message=message,
            details=details,
        ))
        self.logger.warning(f"[{element_id}] {message}")

    def warn_skipped_element(self, element_id: Optional[str], reason: str, details: Dict[str, Any] = None):
        """Record an element that produced no primitive (e.g. non-finite line endpoints)"""
        self._record(element_id, 'skipped_element', f"Skipped element: {reason}", details or {})

    def warn_unsupported_effect(self, element_id: Optional[str], effect_type: str, details: Dict[str, Any] = None):
        """Record warning for unsupported effect"""
        if not self.warn_unsupported:
            return
        self._record(element_id, 'unsupported_effect', f"Unsupported effect: {effect_type}", details or {})

    def warn_font_missing(self, element_id: Optional[str], font_family: str, replacement: str = None):
        """Record warning for missing font"""
        message = f"Font not found: {font_family}"
        if replacement:
            message += f" (replaced with {replacement})"
        self._record(element_id, 'font_missing', message, {
            'font_family': font_family,
            'replacement': replacement,
        })

    def info(self, message: str):
        self.logger.info(message)

    def debug(self, message: str):
        self.logger.debug(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def get_warnings(self) -> List[ConversionWarning]:
        """Get warning list"""
        return self.warnings

    def clear_warnings(self):
        """Clear warning list"""
        self.warnings.clear()


# Global logger instance
_default_logger = ConversionLogger()


def get_logger() -> ConversionLogger:
    """Get default logger"""
    return _default_logger
