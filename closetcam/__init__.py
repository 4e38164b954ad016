"""Camera-based clothing catalog: color naming, recognition and a local photo library."""
