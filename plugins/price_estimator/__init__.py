"""Price estimator plugin."""

manifest = {
    "title": "Price Estimator",
    "summary": (
        "Upload a CSV, auto-detect the price column, fit a standardized "
        "per-feature linear model and estimate prices for new inputs."
    ),
    "blueprint": "price_estimator",
    "category": "Machine Learning",
    "icon": "img/price_estimator_icon.svg",
}


__all__ = ["manifest"]
