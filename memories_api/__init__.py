"""Photo Memories - photo album API with slideshow video generation."""
