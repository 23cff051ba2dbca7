"""
Work Structures Domain

Company -> Department -> Section -> Position directory. Maintained outside
this service; here it is read to resolve names and validate placements.
"""
