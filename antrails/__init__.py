"""antrails — ant foraging simulation with decaying trail markers."""
