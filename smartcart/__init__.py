"""
SmartCart advisory engines.

Responsibilities:
- Recommend products and budget savings for the current cart.
- Map a store's layout and plan a walking route for a shopping list.
- Serve both engines over a small JSON API.
"""
