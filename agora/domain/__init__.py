"""Domain helpers with no IO: ids, query/sort/aggregation and seed content."""
