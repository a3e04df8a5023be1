from synapomorphia.workspace import ItemView

TREE_QUIZ_VIEW = "tree-quiz-view"


class TreeQuizView(ItemView):
    def get_view_type(self) -> str:
        return TREE_QUIZ_VIEW

    def get_display_text(self) -> str:
        return "Tree Quiz View"

    def on_open(self) -> None:
        container = self.container_el.children[1]
        container.empty()
        container.create_el("h4", text="Tree Quiz View!")

    def on_close(self) -> None:
        # Nothing to clean up.
        pass
