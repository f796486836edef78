"""
Recommendation and budget-advice engine.

Responsibilities:
- Rank catalog products against the current cart and an optional customer.
- Merge co-purchase, similarity, preference and trending strategies.
- Suggest cheaper, discounted or bulk options when the cart is over budget.
- Summarise cart totals against the budget.
"""
