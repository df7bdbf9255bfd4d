# sales_api/generate_data.py
import random
from datetime import datetime
from typing import Dict, List, Optional

from faker import Faker

CATEGORIES = ["men's clothing", "jewelery", "electronics", "women's clothing"]

def generate_dataset(rows: int = 60, seed: Optional[int] = None) -> List[Dict]:
    """
    Builds dummy transactions shaped like the remote dataset (camelCase keys,
    dateOfSale as an ISO string), spread over the last three years.
    """
    fake = Faker()
    rng = random.Random(seed)
    if seed is not None:
        fake.seed_instance(seed)

    dataset = []
    for row_id in range(1, rows + 1):
        sale_date: datetime = fake.date_time_between(start_date="-3y", end_date="now")
        dataset.append({
            "id": row_id,
            "title": fake.catch_phrase(),
            "description": fake.sentence(nb_words=12),
            "price": round(rng.uniform(1.0, 1200.0), 2),  # nosec B311
            "category": rng.choice(CATEGORIES),  # nosec B311
            "image": fake.image_url(),
            "sold": rng.random() < 0.5,  # nosec B311
            "dateOfSale": sale_date.isoformat(timespec="seconds"),
        })
    return dataset
