"""Simple entrypoint to seed and preview the storefront catalogue locally."""

import json

from site_app.app import StorefrontApp
from tools.catalogue_service import PRODUCTS_KEY


def main() -> None:
    app = StorefrontApp()
    if app.content_store.get(PRODUCTS_KEY) is None:
        app.seed_content()
    view = app.catalogue.browse(bestsellers_only=True, sort="name-asc")
    print(json.dumps({"total": view["total"], "facets": view["facets"]}, indent=2))


if __name__ == "__main__":
    main()
