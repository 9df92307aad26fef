"""
Scanner facade combining detection, cropping, effects and resizing.
"""

from src.pipeline.scanner import DocumentScanner, ScanResult

__all__ = ["DocumentScanner", "ScanResult"]
