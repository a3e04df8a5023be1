from synapomorphia.views.tree_quiz_view import TREE_QUIZ_VIEW, TreeQuizView

__all__ = ["TREE_QUIZ_VIEW", "TreeQuizView"]
