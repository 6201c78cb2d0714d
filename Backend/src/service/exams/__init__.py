"""
Exam engine: randomized attempts, grading and pass determination.
"""
