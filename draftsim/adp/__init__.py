from .reconciler import ADPReconciler, reconcile, normalize_player_name, name_similarity
from .loader import load_adp_csv, frame_to_entries

__all__ = [
    "ADPReconciler",
    "reconcile",
    "normalize_player_name",
    "name_similarity",
    "load_adp_csv",
    "frame_to_entries",
]
