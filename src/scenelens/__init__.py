"""SceneLens: scene context synthesis over an image recognition provider."""
