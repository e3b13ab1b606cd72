"""
Decoder Configuration Module

Key components:
    - DecoderConfig: Settings for parsing, decoding and output
    - load_config(): Read YAML plus environment overrides
    - get_decoder_config(): Process-wide instance
"""

from .decoder_config import (
    DecoderConfig,
    get_decoder_config,
    load_config,
    reload_config,
)

__all__ = [
    'DecoderConfig',
    'get_decoder_config',
    'load_config',
    'reload_config',
]
