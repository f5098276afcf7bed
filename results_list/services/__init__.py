"""Row store, filtering, view settings, projection building, and the results list controller."""
