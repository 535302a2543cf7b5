"""Host and upstream collaborators: the dpkg database and the topic manifest."""
