"""ログプレフィックス定数."""


class LogPrefix:
    """ロギング用プレフィックス定数."""

    BATCH_JOB = "[BATCH_JOB]"
    LOGIN = "[LOGIN]"
    ROSTER = "[ROSTER]"
    FORMATION_LOAD = "[FORMATION_LOAD]"
    FORMATION_SAVE = "[FORMATION_SAVE]"
    IMPORT_MASTER = "[IMPORT_MASTER]"
    EXPORT = "[EXPORT]"
