"""
Store navigation engine.

Responsibilities:
- Lay out a store's aisles, sections and facilities on a 2-D canvas.
- Order a shopping list into an entrance-to-checkout walking route.
- Answer aisle and facility lookups against the cached map.
"""
