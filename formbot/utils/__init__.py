from .logger import setup_logger
from .similarity import contains_keyword, score
from .options import best_option_match
from .text import normalize, tokenize

__all__ = ["setup_logger", "best_option_match", "contains_keyword", "score", "normalize", "tokenize"]
