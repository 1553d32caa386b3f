from typing import Dict, Any
import pandas as pd

from models.common_models import Dataset

def get_preview_rows(dataset: Dataset, n_rows: int = 20) -> Dict[str, Any]:
    df = pd.DataFrame.from_records(dataset.records, columns=dataset.fields)
    preview_df = df.head(n_rows).astype(object)
    # Fields missing from a record come back as None, not NaN
    preview_df = preview_df.where(preview_df.notna(), None)
    return {
        "columns": list(dataset.fields),
        "rows": preview_df.to_dict(orient="records"),
        "n_records": len(dataset.records),
    }
