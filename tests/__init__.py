"""テストパッケージ."""
