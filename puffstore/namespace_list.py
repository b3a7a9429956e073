class NamespaceList:
    def __init__(self, namespace_list, next_cursor=None):
        self.namespace_list = namespace_list
        self.next_cursor = next_cursor

    def __getitem__(self, index):
        return self.namespace_list[index]

    def __len__(self):
        return len(self.namespace_list)

    def __iter__(self):
        return iter(self.namespace_list)

    def names(self):
        return [namespace.id for namespace in self.namespace_list]

    def __repr__(self):
        return f"NamespaceList({self.namespace_list}, next_cursor={self.next_cursor!r})"
