"""Digest assembly, rendering and validation."""

from devops_digest.adapters.digest.assembler import assemble_digest, digest_stats
from devops_digest.adapters.digest.markdown_generator import MarkdownDigestGenerator
from devops_digest.adapters.digest.validator import validate_file, validate_markdown

__all__ = [
    "assemble_digest",
    "digest_stats",
    "MarkdownDigestGenerator",
    "validate_file",
    "validate_markdown",
]
