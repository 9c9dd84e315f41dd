"""Query functions over an ``AsyncSession``, one module per table."""
