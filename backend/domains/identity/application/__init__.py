"""Identity Domain - Application Layer"""

from domains.identity.application.anonymous_data_merge_service import AnonymousDataMergeService

__all__ = ["AnonymousDataMergeService"]
