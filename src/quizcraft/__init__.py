"""Generate multiple-choice quizzes on any topic and take them."""
