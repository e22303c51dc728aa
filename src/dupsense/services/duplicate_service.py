from typing import List, Sequence

from dupsense.core.models import DuplicateGroup


class DuplicateService:
    @staticmethod
    def files_to_delete(groups: Sequence[DuplicateGroup]) -> List[str]:
        """
        Absolute paths of the files the scorer flags for deletion.

        Only groups with a clear leader contribute; groups marked for manual
        review are left alone.
        """
        paths = []
        for group in groups:
            paths.extend(f.path for f in group.files_to_delete)
        return paths

    @staticmethod
    def space_to_free(groups: Sequence[DuplicateGroup]) -> int:
        """Bytes freed by deleting every file returned by files_to_delete()."""
        return sum(group.size * len(group.files_to_delete) for group in groups)

    @staticmethod
    def groups_for_review(groups: Sequence[DuplicateGroup]) -> List[DuplicateGroup]:
        """Groups without a clear leader."""
        return [group for group in groups if not group.has_clear_leader]

