"""pygame host: window, frame display and keyboard input."""
