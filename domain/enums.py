"""
Domain enums for RecipeShare.
Contains the closed value sets stored on recipe and user documents.
"""

import enum


class Difficulty(str, enum.Enum):
    """How demanding a recipe is"""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class Category(str, enum.Enum):
    """Recipe course or dietary category"""

    APPETIZER = "Appetizer"
    MAIN_COURSE = "Main Course"
    DESSERT = "Dessert"
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"
    BEVERAGE = "Beverage"
    SOUP = "Soup"
    SALAD = "Salad"
    VEGETARIAN = "Vegetarian"
    VEGAN = "Vegan"
    GLUTEN_FREE = "Gluten-Free"


class Cuisine(str, enum.Enum):
    """Recipe cuisine"""

    ITALIAN = "Italian"
    CHINESE = "Chinese"
    MEXICAN = "Mexican"
    INDIAN = "Indian"
    FRENCH = "French"
    JAPANESE = "Japanese"
    THAI = "Thai"
    GREEK = "Greek"
    AMERICAN = "American"
    MEDITERRANEAN = "Mediterranean"
    KOREAN = "Korean"
    SPANISH = "Spanish"
    OTHER = "Other"


class RecipeSort(str, enum.Enum):
    """Accepted values of the ``sort`` listing parameter"""

    NEWEST = "newest"
    OLDEST = "oldest"
    RATING = "rating"
    POPULAR = "popular"


class UserRole(str, enum.Enum):
    """Account roles"""

    USER = "user"
    ADMIN = "admin"
