# worker.py
from prefect import serve
from sales_api.flows import run_reseed_pipeline

if __name__ == "__main__":
    # On-demand full reload of the transactions table from the remote dataset.
    reseed_job = run_reseed_pipeline.to_deployment(
        name="reseed-job",
        tags=["seed", "manual"],
        description="Truncates the transactions table and reloads it from the remote dataset."
    )

    serve(reseed_job, limit=1, pause_on_shutdown=False)
