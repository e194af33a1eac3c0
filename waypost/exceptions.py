class InvalidArgument(Exception):
    def __init__(self, name: str, expected: str):
        super().__init__(f"Invalid argument '{name}': expected {expected}.")
        self.name = name
        self.expected = expected
