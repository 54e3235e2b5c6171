"""
Restaurant discovery package.

Responsibilities:
- Accept optional search criteria (location, cuisine, price, rating, diet flags).
- Query stored restaurants for the matching candidate set.
- Post-filter candidates by great-circle distance when a radius is given.
"""
