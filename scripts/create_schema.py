"""Create the BigQuery dataset and documents table for the bigquery store backend."""

from __future__ import annotations

import sys

from google.cloud import bigquery

from config.settings import get_settings

DOCUMENTS_SCHEMA = [
    bigquery.SchemaField("id", "STRING", mode="REQUIRED"),
    bigquery.SchemaField("content", "STRING", mode="REQUIRED"),
    bigquery.SchemaField("embedding", "FLOAT", mode="REPEATED"),
    bigquery.SchemaField("created_at", "TIMESTAMP", mode="REQUIRED"),
]


def create_schema() -> None:
    settings = get_settings()

    if not settings.gcp_project_id:
        print("❌ GCP_PROJECT_ID is not set. Define it in .env")
        sys.exit(1)

    client = bigquery.Client(project=settings.gcp_project_id)
    dataset_id = f"{settings.gcp_project_id}.{settings.bq_dataset}"

    dataset = bigquery.Dataset(dataset_id)
    dataset.location = "US"
    try:
        client.create_dataset(dataset, exists_ok=True)
        print(f"✅ Dataset: {dataset_id}")
    except Exception as e:
        print(f"❌ Could not create dataset: {e}")
        sys.exit(1)

    table = bigquery.Table(settings.bq_documents_table_id, schema=DOCUMENTS_SCHEMA)
    try:
        client.create_table(table, exists_ok=True)
        print(f"✅ Table: {settings.bq_documents_table_id}")
    except Exception as e:
        print(f"❌ Could not create table {settings.bq_documents_table_id}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    create_schema()
