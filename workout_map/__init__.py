"""Record running and cycling workouts on a map and keep them between sessions."""
