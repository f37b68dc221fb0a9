"""A Moody Place: сайт и CMS артиста."""

__version__ = "1.0.0"
