"""
Fashion Retail Dataset Generator
Writes the six report relations (transactions, products, discounts, stores,
customers, employees) as CSV using vectorized operations.
"""

import random
from datetime import datetime, timedelta
from pathlib import Path

import numpy as np
import polars as pl
from faker import Faker

fake = Faker()
random.seed(42)
np.random.seed(42)
Faker.seed(42)

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "generated"
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

CATEGORIES = {
    "Feminine": ["Dresses", "Skirts", "Blouses", "Coats"],
    "Masculine": ["Suits", "Shirts", "Pants", "Coats"],
    "Children": ["T-shirts", "Pajamas", "Sweaters", "Coats"],
}
PAYMENT_METHODS = ["Cash", "Credit Card"]
START_DATE = datetime(2023, 1, 1)


# ==========================================
# STORES
# ==========================================
def generate_stores(n=35):
    print(f"📊 Generating {n:,} stores...")

    df = pl.DataFrame({
        "Store ID": np.arange(1, n + 1),
        "Country": np.random.choice(["United States", "China", "Germany", "United Kingdom", "France", "Spain", "Portugal"], n),
        "City": [fake.city() for _ in range(n)],
        "Store Name": [f"Store {fake.city()}" for _ in range(n)],
        "Number of Employees": np.random.randint(4, 12, n),
        "Latitude": np.round(np.random.uniform(-40, 60, n), 4),
        "Longitude": np.round(np.random.uniform(-120, 120, n), 4),
    })

    df.write_csv(OUTPUT_DIR / "stores.csv")
    print(f"   ✅ stores.csv: {n:,} rows")
    return df


# ==========================================
# EMPLOYEES
# ==========================================
def generate_employees(store_ids, per_store=8):
    n = len(store_ids) * per_store
    print(f"📊 Generating {n:,} employees...")

    df = pl.DataFrame({
        "Employee ID": np.arange(1, n + 1),
        "Store ID": np.repeat(store_ids, per_store),
        "Name": [fake.name() for _ in range(n)],
        "Position": np.random.choice(["Seller", "Manager", "Cashier"], n, p=[0.7, 0.1, 0.2]),
    })

    df.write_csv(OUTPUT_DIR / "employees.csv")
    print(f"   ✅ employees.csv: {n:,} rows")
    return df


# ==========================================
# CUSTOMERS
# ==========================================
def generate_customers(n=5000):
    print(f"📊 Generating {n:,} customers...")

    df = pl.DataFrame({
        "Customer ID": np.arange(1, n + 1),
        "Name": [fake.name() for _ in range(n)],
        "Email": [fake.email() for _ in range(n)],
        "City": [fake.city() for _ in range(n)],
        "Gender": np.random.choice(["F", "M", "D"], n, p=[0.48, 0.48, 0.04]),
        "Date Of Birth": [fake.date_of_birth(minimum_age=16, maximum_age=80).isoformat() for _ in range(n)],
    })

    df.write_csv(OUTPUT_DIR / "customers.csv")
    print(f"   ✅ customers.csv: {n:,} rows")
    return df


# ==========================================
# PRODUCTS
# ==========================================
def generate_products(n=1200):
    print(f"📊 Generating {n:,} products...")

    categories = np.random.choice(list(CATEGORIES), n, p=[0.4, 0.35, 0.25])
    sub_categories = [random.choice(CATEGORIES[c]) for c in categories]
    base_cost = {"Feminine": 25.0, "Masculine": 30.0, "Children": 12.0}

    df = pl.DataFrame({
        "Product ID": np.arange(1, n + 1),
        "Category": categories,
        "Sub Category": sub_categories,
        "Description EN": [f"{fake.color_name()} {s}" for s in sub_categories],
        "Production Cost": np.round(
            [base_cost[c] * np.random.uniform(0.6, 2.5) for c in categories], 2
        ),
    })

    df.write_csv(OUTPUT_DIR / "products.csv")
    print(f"   ✅ products.csv: {n:,} rows")
    return df


# ==========================================
# DISCOUNTS
# ==========================================
def generate_discounts():
    print("📊 Generating discount campaigns...")

    rows = []
    for month in range(1, 13):
        start = datetime(2023, month, 1)
        for category, subs in CATEGORIES.items():
            rows.append({
                "Start": start.date().isoformat(),
                "End": (start + timedelta(days=14)).date().isoformat(),
                "Discont": random.choice([0.2, 0.3, 0.4, 0.5]),
                "Description": f"{start:%B} {category} sale",
                "Category": category,
                "Sub Category": random.choice(subs),
            })

    df = pl.DataFrame(rows)
    df.write_csv(OUTPUT_DIR / "discounts.csv")
    print(f"   ✅ discounts.csv: {len(rows):,} rows")
    return df


# ==========================================
# TRANSACTIONS - VECTORIZED!
# ==========================================
def generate_transactions(n, products_df, store_ids, customer_ids, employees_df):
    print(f"📊 Generating {n:,} transaction lines (vectorized)...")

    product_ids = products_df["Product ID"].to_numpy()
    costs = dict(zip(product_ids, products_df["Production Cost"].to_list()))

    picked = np.random.choice(product_ids, n)
    unit_price = np.round([costs[p] * 2.2 for p in picked], 2)
    quantity = np.random.randint(1, 4, n)
    discount = np.random.choice([0.0, 0.2, 0.3, 0.4, 0.5], n, p=[0.6, 0.1, 0.1, 0.1, 0.1])
    is_return = np.random.random(n) < 0.05
    line_total = np.round(unit_price * quantity * (1 - discount), 2)
    line_total = np.where(is_return, -line_total, line_total)

    stores = np.random.choice(store_ids, n)
    employee_by_store = {
        s: g["Employee ID"].to_list()
        for (s,), g in employees_df.group_by(["Store ID"])
    }
    employees = [random.choice(employee_by_store[s]) for s in stores]

    days = np.random.randint(0, 730, n)
    minutes = np.random.randint(9 * 60, 21 * 60, n)
    dates = [
        (START_DATE + timedelta(days=int(d), minutes=int(m))).strftime("%Y-%m-%d %H:%M:%S")
        for d, m in zip(days, minutes)
    ]

    df = pl.DataFrame({
        "Invoice ID": [f"INV-{i:09d}" for i in range(n)],
        "Line": np.ones(n, dtype=int),
        "Customer ID": np.random.choice(customer_ids, n),
        "Product ID": picked,
        "Unit Price": unit_price,
        "Quantity": quantity,
        "Date": dates,
        "Discount": discount,
        "Line Total": line_total,
        "Store ID": stores,
        "Employee ID": employees,
        "Transaction Type": np.where(is_return, "Return", "Sale"),
        "Payment Method": np.random.choice(PAYMENT_METHODS, n, p=[0.3, 0.7]),
    })

    df.write_csv(OUTPUT_DIR / "transactions.csv")
    print(f"   ✅ transactions.csv: {n:,} rows")
    return df


# ==========================================
# MAIN
# ==========================================
def main():
    print("=" * 60)
    print("👗 Fashion Retail Dataset Generator")
    print("=" * 60 + "\n")

    stores_df = generate_stores()
    store_ids = stores_df["Store ID"].to_numpy()
    employees_df = generate_employees(store_ids)
    customers_df = generate_customers()
    products_df = generate_products()
    generate_discounts()
    generate_transactions(
        100000,
        products_df,
        store_ids,
        customers_df["Customer ID"].to_numpy(),
        employees_df,
    )

    print("\n" + "=" * 60)
    print("✅ Dataset Generation Complete!")
    print("=" * 60)
    print(f"\n📁 Output: {OUTPUT_DIR}\n")

    for f in sorted(OUTPUT_DIR.glob("*.csv")):
        size = f.stat().st_size / 1024 / 1024
        print(f"   📄 {f.name}: {size:.2f} MB")


if __name__ == "__main__":
    main()
