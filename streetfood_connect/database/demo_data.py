# streetfood_connect/database/demo_data.py
"""Demo accounts, inventory and orders. Run: python -m streetfood_connect.database.demo_data"""

from streetfood_connect.gateway import AuthError, Gateway, create_gateway
from streetfood_connect.gateway.base import utcnow

DEMO_PASSWORD = "demo1234"

DEMO_SUPPLIERS = [
    {
        "name": "Fresh Farms",
        "email": "freshfarms@demo.in",
        "phone": "+91 98100 11111",
        "location": "Azadpur Mandi, Delhi",
        "businessType": "Wholesaler",
        "specialties": ["Vegetables", "Fruits"],
        "rating": 4.6,
        "verified": True,
        "inventory": [
            {"name": "Onions", "quantity": 500, "unit": "kg", "price": 32},
            {"name": "Tomatoes", "quantity": 300, "unit": "kg", "price": 28},
            {"name": "Potatoes", "quantity": 800, "unit": "kg", "price": 22},
        ],
    },
    {
        "name": "Spice Route Traders",
        "email": "spiceroute@demo.in",
        "phone": "+91 98200 22222",
        "location": "Khari Baoli, Delhi",
        "businessType": "Distributor",
        "specialties": ["Spices", "Grains"],
        "rating": 4.1,
        "verified": True,
        "inventory": [
            {"name": "Red chilli powder", "quantity": 120, "unit": "kg", "price": 240},
            {"name": "Turmeric", "quantity": 90, "unit": "kg", "price": 180},
            {"name": "Basmati rice", "quantity": 1000, "unit": "kg", "price": 95},
        ],
    },
    {
        "name": "Amul Dairy Point",
        "email": "dairypoint@demo.in",
        "phone": "+91 98300 33333",
        "location": "Andheri, Mumbai",
        "businessType": "Retailer",
        "specialties": ["Dairy"],
        "rating": 3.4,
        "verified": False,
        "inventory": [
            {"name": "Paneer", "quantity": 60, "unit": "kg", "price": 360},
            {"name": "Butter", "quantity": 40, "unit": "kg", "price": 480},
        ],
    },
]

DEMO_VENDORS = [
    {"name": "Raju Chaat Corner", "email": "raju@demo.in", "phone": "+91 99100 44444", "location": "Chandni Chowk, Delhi"},
    {"name": "Mumbai Vada Pav", "email": "vadapav@demo.in", "phone": "+91 99200 55555", "location": "Dadar, Mumbai"},
]


def _account(gateway: Gateway, data: dict, role: str) -> str:
    try:
        user = gateway.create_account(data["email"], DEMO_PASSWORD, data["name"])
    except AuthError as e:
        if e.code == AuthError.EMAIL_IN_USE:
            print(f"• {data['email']} already exists, skipping")
            return ""
        raise
    profile = {k: v for k, v in data.items() if k != "inventory"}
    profile.setdefault("rating", 0)
    profile.setdefault("verified", False)
    gateway.bind(user).create_user_profile(user.uid, {
        **profile,
        "role": role,
        "uid": user.uid,
        "createdAt": utcnow(),
    })
    return user.uid


def create_demo_data(gateway: Gateway = None) -> None:
    gateway = gateway or create_gateway()

    supplier_ids = []
    for supplier in DEMO_SUPPLIERS:
        uid = _account(gateway, supplier, "supplier")
        if not uid:
            continue
        supplier_ids.append(uid)
        for item in supplier["inventory"]:
            gateway.add_inventory_item({**item, "supplierId": uid})
        print(f"✅ Supplier {supplier['name']} ({len(supplier['inventory'])} items)")

    vendor_ids = [uid for uid in (_account(gateway, v, "vendor") for v in DEMO_VENDORS) if uid]
    print(f"✅ {len(vendor_ids)} vendors")

    if not supplier_ids or not vendor_ids:
        print("Orders already seeded")
        return

    # every vendor orders from every supplier: their first two inventory lines
    count = 0
    for vendor_id in vendor_ids:
        for supplier_id, supplier in zip(supplier_ids, DEMO_SUPPLIERS):
            materials = [
                {
                    "materialName": item["name"],
                    "quantity": 10,
                    "unit": item["unit"],
                    "unitPrice": item["price"],
                    "total": 10 * item["price"],
                }
                for item in supplier["inventory"][:2]
            ]
            gateway.create_order({
                "vendorId": vendor_id,
                "supplierId": supplier_id,
                "materials": materials,
                "totalAmount": sum(m["total"] for m in materials),
                "paymentStatus": "pending",
                "orderDate": utcnow().date().isoformat(),
            })
            count += 1
    print(f"✅ {count} orders")
    print(f"Demo password for every account: {DEMO_PASSWORD}")


if __name__ == "__main__":
    create_demo_data()
