"""Default site content written by the admin seed operation."""

from typing import Any, Dict, List

DEFAULT_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": "top-01",
        "name": "Classic Crew Neck T-Shirt",
        "category": "Tops",
        "categoryGroup": "Apparel",
        "gender": "Unisex",
        "isBestseller": True,
        "displayOrder": 1,
        "price": 12.5,
        "moq": 20,
        "description": "Premium combed cotton tee, a reliable canvas for printing or embroidery.",
        "availableColors": [
            {"name": "White", "hex": "#FFFFFF"},
            {"name": "Black", "hex": "#212121"},
            {"name": "Heather Grey", "hex": "#B2B2B2"},
            {"name": "Navy", "hex": "#000080"},
        ],
        "availableSizes": [
            {"name": "S", "width": 18, "length": 28},
            {"name": "M", "width": 20, "length": 29},
            {"name": "L", "width": 22, "length": 30},
            {"name": "XL", "width": 24, "length": 31},
        ],
        "imageUrls": {},
        "tags": ["t-shirt", "crew neck", "cotton"],
    },
    {
        "id": "jersey-01",
        "name": "Pro Performance Sports Jersey",
        "category": "Custom Jerseys",
        "categoryGroup": "Apparel",
        "gender": "Unisex",
        "isBestseller": True,
        "displayOrder": 2,
        "price": 28,
        "moq": 10,
        "description": "Lightweight moisture-wicking jersey, fully customisable for team sports.",
        "availableColors": [
            {"name": "Red", "hex": "#FF0000"},
            {"name": "Blue", "hex": "#0000FF"},
            {"name": "White", "hex": "#FFFFFF"},
        ],
        "availableSizes": [{"name": "S"}, {"name": "M"}, {"name": "L"}, {"name": "XL"}],
        "imageUrls": {},
        "tags": ["jersey", "sports", "teamwear"],
    },
    {
        "id": "hoodie-01",
        "name": "Premium Pullover Hoodie",
        "category": "Outerwear",
        "categoryGroup": "Apparel",
        "gender": "Unisex",
        "isBestseller": False,
        "displayOrder": 3,
        "price": 34,
        "moq": 20,
        "description": "Soft cotton-poly blend pullover for everyday wear or team uniforms.",
        "availableColors": [
            {"name": "Black", "hex": "#212121"},
            {"name": "Charcoal", "hex": "#36454F"},
            {"name": "Maroon", "hex": "#800000"},
        ],
        "availableSizes": [{"name": "S"}, {"name": "M"}, {"name": "L"}, {"name": "XL"}],
        "imageUrls": {},
        "tags": ["hoodie", "fleece"],
    },
    {
        "id": "legging-01",
        "name": "High-Rise Training Leggings",
        "category": "Bottoms",
        "categoryGroup": "Apparel",
        "gender": "Women",
        "isBestseller": False,
        "displayOrder": 4,
        "price": 26,
        "description": "Four-way stretch leggings with a squat-proof knit.",
        "availableColors": [{"name": "Black", "hex": "#212121"}, {"name": "Olive", "hex": "#556B2F"}],
        "availableSizes": [{"name": "XS"}, {"name": "S"}, {"name": "M"}, {"name": "L"}],
        "imageUrls": {},
        "tags": ["leggings", "training"],
    },
    {
        "id": "cap-01",
        "name": "Structured Snapback Cap",
        "category": "Caps",
        "categoryGroup": "Headwear",
        "gender": "Unisex",
        "isBestseller": True,
        "displayOrder": 5,
        "price": 9.5,
        "moq": 25,
        "description": "Six-panel snapback with a flat brim, ready for 3D embroidery.",
        "availableColors": [{"name": "Black", "hex": "#212121"}, {"name": "Navy", "hex": "#000080"}],
        "availableSizes": [{"name": "One Size"}],
        "imageUrls": {},
        "tags": ["cap", "snapback"],
    },
    {
        "id": "beanie-01",
        "name": "Cuffed Knit Beanie",
        "category": "Beanies",
        "categoryGroup": "Headwear",
        "gender": "Unisex",
        "isBestseller": False,
        "displayOrder": 6,
        "price": 8,
        "description": "Warm rib-knit beanie with a fold-over cuff for woven labels.",
        "availableColors": [{"name": "Grey", "hex": "#808080"}],
        "availableSizes": [{"name": "One Size"}],
        "imageUrls": {},
        "tags": ["beanie", "winter"],
    },
    {
        "id": "tote-01",
        "name": "Heavy Canvas Tote Bag",
        "category": "Tote Bags",
        "categoryGroup": "Bags",
        "gender": "Unisex",
        "isBestseller": False,
        "displayOrder": 7,
        "price": 0,
        "description": "12oz canvas tote; price on request.",
        "availableColors": [{"name": "Natural", "hex": "#F5F0E1"}],
        "availableSizes": [{"name": "One Size"}],
        "imageUrls": {},
        "tags": ["tote", "canvas"],
    },
]

DEFAULT_COLLECTIONS: List[str] = ["Apparel", "Headwear", "Bags"]

DEFAULT_FAQS: List[Dict[str, str]] = [
    {
        "id": "faq-moq",
        "question": "What is your minimum order quantity?",
        "answer": "Minimums are set per product and shown on each product page.",
    },
    {
        "id": "faq-turnaround",
        "question": "How long does production take?",
        "answer": "Most orders ship within 2-3 weeks of artwork approval.",
    },
]

DEFAULT_CONTENT: Dict[str, Any] = {
    "products": DEFAULT_PRODUCTS,
    "collections": DEFAULT_COLLECTIONS,
    "faqs": DEFAULT_FAQS,
}

__all__ = ["DEFAULT_PRODUCTS", "DEFAULT_COLLECTIONS", "DEFAULT_FAQS", "DEFAULT_CONTENT"]
