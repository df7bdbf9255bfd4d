# scripts/stress_test.py
import time

import pandas as pd
import requests

# Configuration
API_URL = "http://localhost:5000"
ROUNDS = 20
MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

def time_combined_requests():
    print(f"Requesting /api/combined for every month, {ROUNDS} rounds...")
    timings = []

    with requests.Session() as session:
        for _ in range(ROUNDS):
            for month in MONTHS:
                start_time = time.perf_counter()
                response = session.get(f"{API_URL}/api/combined", params={"month": month})
                duration = time.perf_counter() - start_time

                timings.append({
                    "month": month,
                    "status": response.status_code,
                    "ms": duration * 1000,
                })

    df = pd.DataFrame(timings)
    failures = df[df["status"] != 200]
    if not failures.empty:
        print(f"{len(failures)} requests failed, statuses: {failures['status'].unique().tolist()}")

    print(df.groupby("month")["ms"].describe(percentiles=[0.5, 0.95]).round(1))
    print(f"Overall p95: {df['ms'].quantile(0.95):.1f} ms")

if __name__ == "__main__":
    try:
        # Check if the server is running
        requests.get(f"{API_URL}/")
        time_combined_requests()
    except requests.exceptions.ConnectionError:
        print("Error: Could not connect to API.")
        print("Make sure the app is running: 'uvicorn sales_api.main:app --port 5000'")
