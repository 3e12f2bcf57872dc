from __future__ import annotations

import requests

from bom_tree.client import PartServiceClient
from bom_tree.config import BOMTreeSettings
from bom_tree.models import Forest, Part
from bom_tree.services.mutations import MutationCoordinator
from bom_tree.view_state import SelectionState


class BOMTreeBackend:
    def __init__(
        self,
        settings: BOMTreeSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.settings = settings or BOMTreeSettings()

        self.client = PartServiceClient(self.settings, session=session)
        self.mutations = MutationCoordinator(self.client, self.settings)
        self.selection = SelectionState()

    @property
    def parts(self) -> list[Part]:
        return self.mutations.parts

    @property
    def forest(self) -> Forest:
        return self.mutations.forest
