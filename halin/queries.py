"""
Cypher statements issued by the cluster manager.
"""

CREATE_USER = "CALL dbms.security.createUser($username, $password, false)"

DELETE_USER = "CALL dbms.security.deleteUser($username)"

CREATE_ROLE = "CALL dbms.security.createRole($role)"

DELETE_ROLE = "CALL dbms.security.deleteRole($role)"

ADD_ROLE_TO_USER = "CALL dbms.security.addRoleToUser($role, $username)"

REMOVE_ROLE_FROM_USER = "CALL dbms.security.removeRoleFromUser($role, $username)"

# Yields one record per role, with the role name under `value`.
DBMS_SECURITY_USER_ROLES = "CALL dbms.security.listRolesForUser($username)"
